import pytest

from errors import InvalidFileType, MissingRequiredColumn, ParseError
from label_csv import (
    REQUIRED_COLUMN, InputRow, TEMPLATE_FILENAME, check_upload, is_csv_upload, parse_table, template_csv,
    validate_columns,
)


def test_parse_rows_and_columns(sample_csv):
    table = parse_table(sample_csv)
    assert table.columns == ["LOCALIZACAO", "QUANTIDADE"]
    assert table.rows == [
        InputRow("A-01-01", "1"),
        InputRow("A-01-02", "2"),
        InputRow("B-05-10", "1"),
    ]
    assert len(table) == 3


def test_empty_lines_are_skipped():
    data = b"LOCALIZACAO;QUANTIDADE\n\nA-01-01;1\n\n\nB-05-10;3\n\n"
    assert [r.location_code for r in parse_table(data).rows] == ["A-01-01", "B-05-10"]


def test_crlf_and_bom():
    data = "\ufeffLOCALIZACAO;QUANTIDADE\r\nC-02-03;4\r\n".encode("utf-8")
    table = parse_table(data)
    assert table.columns == ["LOCALIZACAO", "QUANTIDADE"]
    assert table.rows == [InputRow("C-02-03", "4")]


def test_values_are_not_coerced():
    table = parse_table(b"LOCALIZACAO;QUANTIDADE;OBS\n007;abc;x\n")
    assert table.rows[0].location_code == "007"
    assert table.rows[0].quantity == "abc"


def test_quantity_column_is_optional():
    table = validate_columns(parse_table(b"LOCALIZACAO\nA-01-01\nA-01-02\n"))
    assert table.rows == [InputRow("A-01-01", None), InputRow("A-01-02", None)]


def test_blank_code_rows_are_kept_at_parse_time():
    table = parse_table(b"LOCALIZACAO;QUANTIDADE\n;2\nA-01-01;1\n")
    assert [r.location_code for r in table.rows] == ["", "A-01-01"]


def test_invalid_utf8_is_a_parse_error():
    with pytest.raises(ParseError) as exc:
        parse_table("LOCALIZACAO\nSÃO-01\n".encode("latin-1"))
    assert str(exc.value).startswith("Erro ao ler o arquivo:")


@pytest.mark.parametrize("header", [
    b"LOCAL;QUANTIDADE\n",
    b"localizacao;QUANTIDADE\n",
    b"LOCALIZACAO,QUANTIDADE\n",
    b"",
])
def test_missing_required_column(header):
    with pytest.raises(MissingRequiredColumn) as exc:
        validate_columns(parse_table(header + b"A-01-01;1\n"))
    assert str(exc.value) == "O arquivo CSV deve conter a coluna: LOCALIZACAO"
    assert exc.value.column == REQUIRED_COLUMN == "LOCALIZACAO"


@pytest.mark.parametrize("name,mimetype,ok", [
    ("locais.csv", "text/csv", True),
    ("locais.csv", "application/vnd.ms-excel", True),
    ("locais", "text/csv", True),
    ("locais.xlsx", "application/octet-stream", False),
    ("locais.CSV", None, False),
])
def test_is_csv_upload(name, mimetype, ok):
    assert is_csv_upload(name, mimetype) is ok


def test_check_upload_rejects_other_files():
    with pytest.raises(InvalidFileType) as exc:
        check_upload("planilha.xlsx", "application/octet-stream")
    assert str(exc.value) == "Por favor, selecione um arquivo .csv"


def test_template_bytes():
    assert TEMPLATE_FILENAME == "modelo_localizacao.csv"
    assert template_csv() == (
        b"\xef\xbb\xbfLOCALIZACAO;QUANTIDADE\nA-01-01;1\nA-01-02;2\nB-05-10;1"
    )


def test_template_parses_back():
    table = validate_columns(parse_table(template_csv()))
    assert [(r.location_code, r.quantity) for r in table.rows] == [
        ("A-01-01", "1"), ("A-01-02", "2"), ("B-05-10", "1"),
    ]
