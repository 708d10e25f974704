"""
IoC wiring. container.py imports the generated Prisma client, so it is
imported only by the application entry point, never from here.
"""

from community_messaging.setup.ioc.handlers import HandlerProvider

__all__ = ["HandlerProvider"]
