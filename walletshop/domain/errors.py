# walletshop/domain/errors.py


class BusinessError(Exception):
    """
    Oczekiwany blad biznesowy z komunikatem dla klienta.
    Routery mapuja go na 400, wszystko inne leci dalej jako 500.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class OrderValidationError(BusinessError):
    """Odrzucenie linii zamowienia zanim cokolwiek zostanie zapisane."""


class CatalogMismatchError(OrderValidationError):
    def __init__(self):
        super().__init__("One or more items not found or inactive")


class InvalidQuantityError(OrderValidationError):
    def __init__(self, item_id):
        super().__init__(f"Invalid quantity for item {item_id}")
        self.item_id = item_id


class InvalidTotalError(OrderValidationError):
    def __init__(self, item_id):
        super().__init__(f"Invalid total price for {item_id}")
        self.item_id = item_id


class BulkFileError(BusinessError):
    """Plik bulk odrzucony w calosci (rozszerzenie, kolumny, rozmiar)."""


class WalletBusyError(RuntimeError):
    def __init__(self, wallet_code: str):
        super().__init__(f"Wallet {wallet_code} is locked by another operation")
        self.wallet_code = wallet_code
