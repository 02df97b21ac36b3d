"""Sample extension contributing the ``zftp`` profile type."""

from __future__ import annotations

from typing import Sequence

from mfprofiles.plugins import ExtensionContext, ProfileTypeDescriptor
from mfprofiles.schemas import ProfileTypeSchema, PropertySpec


class FtpProfileTypeExtension(ProfileTypeDescriptor):
    """Minimal descriptor used to validate the loader pipeline."""

    name = "zftp"
    version = "0.0.1"
    min_core = "0.1.0"

    def __init__(self) -> None:
        self.shutdown_called = False
        self.registration_count = 0
        self.last_context: ExtensionContext | None = None

    def register(self, ctx: ExtensionContext) -> Sequence[ProfileTypeSchema]:
        self.registration_count += 1
        self.last_context = ctx
        return [
            ProfileTypeSchema(
                type="zftp",
                properties={
                    "host": PropertySpec("string", description="Host name of the FTP service."),
                    "port": PropertySpec("number", description="Port of the FTP service."),
                    "user": PropertySpec("string", secure=True, description="User name for FTP."),
                    "password": PropertySpec("string", secure=True, description="Password for FTP."),
                    "secureFtp": PropertySpec("boolean", description="Use FTPS (FTP over TLS)."),
                    "connectionTimeout": PropertySpec("number", description="Milliseconds to wait for a connection."),
                },
            )
        ]

    async def on_shutdown(self) -> None:
        self.shutdown_called = True
