"""Service layer exports."""

from .errors import SaveLoadError
from .battle_service import BattleOutcome, BattleService
from .customer_service import CustomerService
from .pack_service import PackService
from .save_service import LoadResult, SaveService
from .session_service import GameSession, SaveResult
from .shop_service import ShopService
from .simulation_service import SimSnapshot, SimulationService
from .storage import FileStorage, MemoryStorage, StorageLike

__all__ = [
    "SaveLoadError",
    "BattleOutcome",
    "BattleService",
    "CustomerService",
    "PackService",
    "LoadResult",
    "SaveService",
    "GameSession",
    "SaveResult",
    "ShopService",
    "SimSnapshot",
    "SimulationService",
    "FileStorage",
    "MemoryStorage",
    "StorageLike",
]
