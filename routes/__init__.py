# Routes package for the Thrift Fashion Proxy
from .thrift import router as thrift_router
from .sold import router as sold_router

__all__ = [
    'thrift_router',
    'sold_router',
]
