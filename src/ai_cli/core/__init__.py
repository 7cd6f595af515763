from ai_cli.core.models import Message, Role, Usage
from ai_cli.core.transcript import FormatError, Transcript, dump, load, loads
from ai_cli.core.client import Client, ClientBusyError, ClientConfig

__all__ = [
    "Message", "Role", "Usage",
    "FormatError", "Transcript", "dump", "load", "loads",
    "Client", "ClientBusyError", "ClientConfig",
]
