from flask import Flask, request, redirect, url_for, render_template_string, send_file
import os, logging
from io import BytesIO
from label_csv import TEMPLATE_FILENAME, template_csv
from label_session import SessionStore

APP_DIR = os.path.dirname(os.path.abspath(__file__))

HOST = os.environ.get("ETIQUETAS_HOST", "127.0.0.1")
PORT = int(os.environ.get("ETIQUETAS_PORT", "5000"))
DEBUG = os.environ.get("ETIQUETAS_DEBUG", "0").lower() in ("1", "true", "yes")
MAX_UPLOAD_MB = int(os.environ.get("ETIQUETAS_MAX_UPLOAD_MB", "5"))
LOG_LEVEL = os.environ.get("ETIQUETAS_LOG_LEVEL", "INFO").upper()

CSS = open(os.path.join(APP_DIR, "static.css"), "r", encoding="utf-8").read()

logger = logging.getLogger(__name__)

BASE_HTML = """
<!doctype html>
<html lang="pt-BR">
<head>
  <meta charset="utf-8"/>
  <meta name="viewport" content="width=device-width, initial-scale=1"/>
  <title>{{title}}</title>
  <style>{{css}}</style>
</head>
<body>
  <div class="wrap">
    {% block body %}{% endblock %}
  </div>
</body>
</html>
"""

INDEX_HTML = """
{% extends base %}
{% block body %}
  <div class="card">
    <div class="center">
      <h1>Etiquetas de Localização</h1>
      <div class="subtle">Gera etiquetas 100x70mm para endereçamento de estoque.</div>
    </div>

    {% if s.error %}
      <div class="error">{{s.error}}</div>
    {% endif %}

    <form method="post" action="{{url_for('upload')}}" enctype="multipart/form-data" class="drop">
      <label for="file-upload">{{s.file_name or 'Clique para selecionar o CSV'}}</label>
      <input id="file-upload" type="file" name="file" accept=".csv" required />
      <button type="submit" class="secondary">Carregar</button>
    </form>

    {% if s.rows %}
      <div class="subtle center">{{s.rows|length}} linha(s) carregada(s)</div>
    {% endif %}

    <div class="row">
      <a class="button secondary" href="{{url_for('download_template')}}">Modelo CSV</a>
      <form method="post" action="{{url_for('generate')}}">
        <button type="submit" {{'disabled' if not s.can_export else ''}}>
          {{'Gerando...' if s.loading else 'Gerar PDF'}}
        </button>
      </form>
    </div>

    <div class="subtle center">O arquivo deve ter a coluna: <b>LOCALIZACAO</b></div>
  </div>
{% endblock %}
"""

app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_MB * 1024 * 1024

store = SessionStore()


@app.route("/")
def home():
    return render_template_string(INDEX_HTML, base=app.jinja_env.from_string(BASE_HTML), css=CSS,
                                  title="Etiquetas de Localização", s=store.session)


@app.route("/upload", methods=["POST"])
def upload():
    f = request.files.get("file")
    if not f or not f.filename:
        logger.warning("upload sem arquivo")
        return redirect(url_for("home"))
    store.load(f.filename, f.mimetype, f.read())
    return redirect(url_for("home"))


@app.route("/modelo")
def download_template():
    return send_file(BytesIO(template_csv()), as_attachment=True, download_name=TEMPLATE_FILENAME,
                     mimetype="text/csv; charset=utf-8")


@app.route("/gerar", methods=["POST"])
def generate():
    _, result = store.export()
    if result is None:
        return redirect(url_for("home"))
    return send_file(BytesIO(result.pdf), as_attachment=True, download_name=result.filename,
                     mimetype="application/pdf")


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(message)s")
    app.run(host=HOST, port=PORT, debug=DEBUG)
