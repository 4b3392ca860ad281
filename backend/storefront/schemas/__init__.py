"""Request and response models for the storefront API."""
