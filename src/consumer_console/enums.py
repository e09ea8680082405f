import enum


# Consumer related enums
class ConsumerStatus(str, enum.Enum):
    RUNNING = "running"
    STOPPED = "stopped"


# Failed callback related enums
class BulkAction(str, enum.Enum):
    RETRY = "retry"
    DELETE = "delete"
