from dataclasses import dataclass

from src.leadsite.core.services import DbSessionService
from src.leadsite.core.storage.log_buffer import LogBuffer


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    log_buffer: LogBuffer
