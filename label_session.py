"""Operator session: the loaded table plus UI flags, and the operations on it.

Each operation takes the current `LabelSession` and returns a new one, so the
pipeline can be driven without the web layer.
"""
import io
import logging
import threading
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from errors import InvalidFileType, MissingRequiredColumn, NoDataToExport, ParseError
from label_csv import InputRow, check_upload, parse_table, validate_columns
from label_pdf import OUTPUT_FILENAME, LabelReport, Renderer, generate_labels_pdf
from barcode_render import render_code128

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LabelSession:
    rows: List[InputRow] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)
    file_name: str = ""
    error: str = ""
    loading: bool = False

    @property
    def can_export(self) -> bool:
        return bool(self.rows) and not self.loading


@dataclass(frozen=True)
class LabelExport:
    pdf: bytes
    report: LabelReport
    filename: str = OUTPUT_FILENAME


def load_file(session: LabelSession, file_name: str, mimetype: Optional[str], data: bytes) -> LabelSession:
    try:
        check_upload(file_name, mimetype)
    except InvalidFileType as e:
        logger.warning("arquivo recusado: %s (%s)", file_name, mimetype)
        return replace(session, error=str(e))

    try:
        table = validate_columns(parse_table(data))
    except (ParseError, MissingRequiredColumn) as e:
        logger.warning("%s: %s", file_name, e)
        return LabelSession(file_name=file_name, error=str(e), loading=session.loading)

    logger.info("%s carregado: %d linhas", file_name, len(table))
    return LabelSession(rows=list(table.rows), columns=list(table.columns), file_name=file_name,
                        loading=session.loading)


def export_labels(session: LabelSession, render: Renderer = render_code128) -> Tuple[LabelSession, Optional[LabelExport]]:
    if not session.rows:
        return replace(session, error=str(NoDataToExport())), None
    if session.loading:
        logger.warning("geração já em andamento, pedido ignorado")
        return session, None

    buf = io.BytesIO()
    try:
        report = generate_labels_pdf(session.rows, buf, render=render)
    except NoDataToExport as e:
        return replace(session, error=str(e), loading=False), None

    done = replace(session, error="", loading=False)
    return done, LabelExport(pdf=buf.getvalue(), report=report)


class SessionStore:
    """Current session of the single operator, shared by the request threads."""

    def __init__(self):
        self._lock = threading.Lock()
        self._session = LabelSession()
        self._run = None

    @property
    def session(self) -> LabelSession:
        with self._lock:
            return self._session

    def reset(self):
        with self._lock:
            self._session = LabelSession()
            self._run = None

    def load(self, file_name, mimetype, data) -> LabelSession:
        with self._lock:
            self._session = load_file(self._session, file_name, mimetype, data)
            return self._session

    def export(self, render: Renderer = render_code128) -> Tuple[LabelSession, Optional[LabelExport]]:
        with self._lock:
            current = self._session
            if current.loading or not current.rows:
                self._session, _ = export_labels(current, render)
                return self._session, None
            self._session = replace(current, loading=True)
            run = self._run = object()

        done, result = current, None
        try:
            done, result = export_labels(current, render)
        finally:
            with self._lock:
                if self._run is run:
                    self._run = None
                    # an upload made during the run replaces the table; keep it
                    if self._session.rows is current.rows:
                        self._session = done
                    else:
                        self._session = replace(self._session, loading=False)
        return done, result
