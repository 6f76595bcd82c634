class LabelError(Exception):
    """Base class for every error shown to the operator."""


class InvalidFileType(LabelError):
    def __init__(self, file_name: str = ""):
        self.file_name = file_name
        super().__init__("Por favor, selecione um arquivo .csv")


class ParseError(LabelError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Erro ao ler o arquivo: {detail}")


class MissingRequiredColumn(LabelError):
    def __init__(self, column: str):
        self.column = column
        super().__init__(f"O arquivo CSV deve conter a coluna: {column}")


class NoDataToExport(LabelError):
    def __init__(self, message: str = "Nenhum dado para gerar."):
        super().__init__(message)


class SymbolRenderError(LabelError):
    def __init__(self, code: str, detail: str = ""):
        self.code = code
        self.detail = detail
        super().__init__(f"Erro ao gerar barcode para {code}: {detail}")
