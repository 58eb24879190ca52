# commands/errors.py

EXAMPLE_FORMATS = (
    '"coca cola 20"',
    '"cervezas 5, papas 3"',
)


class CommandError(Exception):
    """Error recuperable al interpretar un comando; `message` va al usuario."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoMatchFound(CommandError):
    def __init__(self, query: str):
        super().__init__(f"Producto no encontrado: {query}")
        self.query = query


class UnrecognizedCommandSyntax(CommandError):
    def __init__(self, text: str):
        super().__init__(
            f"Comando no reconocido: {text}. "
            f"Prueba con {EXAMPLE_FORMATS[0]} o {EXAMPLE_FORMATS[1]}"
        )
        self.text = text


class InvalidQuantity(CommandError):
    def __init__(self, query: str, quantity):
        super().__init__(f"Cantidad inválida para {query}: {quantity}")
        self.query = query
        self.quantity = quantity


class EmptySegmentationResult(CommandError):
    def __init__(self, text: str, usable: int):
        super().__init__(
            f"No se pudo dividir en varios comandos ({usable} válidos): {text}"
        )
        self.text = text
        self.usable = usable
