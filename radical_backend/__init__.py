from radical_backend.app_factory import create_app

__all__ = ['create_app']
