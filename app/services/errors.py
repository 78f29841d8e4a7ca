"""Errors raised by the store layer (identity, catalog, entitlements)."""


class StoreError(Exception):
    """A read or write against the backing store failed."""


class AlreadyRegisteredError(StoreError):
    """The identity directory already holds an account for this email."""

    def __init__(self, email: str):
        super().__init__(f"User with email {email} already registered")
        self.email = email


class DuplicateProductError(StoreError):
    """Another course is already mapped to this Hotmart product id."""

    def __init__(self, hotmart_id: str):
        super().__init__(f"Course already mapped to Hotmart product {hotmart_id}")
        self.hotmart_id = hotmart_id
