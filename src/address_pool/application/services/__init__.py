from .address_service import AddressService, bootstrap_pool

__all__ = ["AddressService", "bootstrap_pool"]
