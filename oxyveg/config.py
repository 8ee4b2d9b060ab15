import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

from oxyveg.scenarios import CLIMATE_CONFIGS, SCENARIO_FILES, SensitivityFamily
from oxyveg.utilities import DEFAULT_OXYGEN, SENSITIVITY_OXYGEN

logger = logging.getLogger(__name__)


@dataclass
class StudyConfig:
    """Options of the global totals workflow."""
    input_dir: Optional[str] = None          # LPJ-LMfire output root
    data_dir: Optional[str] = None           # helper data (COPSE output, supplementary data)
    scenarios: List[str] = field(default_factory=lambda: [s.value for s in SCENARIO_FILES])
    simfolders: List[str] = field(default_factory=lambda: [folder for folder, _ in SCENARIO_FILES.values()])
    oxygen: List[float] = field(default_factory=lambda: list(DEFAULT_OXYGEN))
    variables: List[str] = field(default_factory=lambda: ['NPP', 'pftalbiomass', 'forestcov'])
    climate_config: str = ''
    output_dir: Optional[str] = None
    outfile: str = 'master_oxygen_totals_generated.xlsx'
    sensitivity_families: List[str] = field(default_factory=lambda: [f.value for f in SensitivityFamily])
    sensitivity_variables: List[str] = field(default_factory=lambda: ['pftalbiomass', 'forestcov'])
    sensitivity_oxygen: List[float] = field(default_factory=lambda: list(SENSITIVITY_OXYGEN))
    climate_configs: List[str] = field(default_factory=lambda: list(CLIMATE_CONFIGS))
    max_workers: int = 1

    def __post_init__(self):
        if len(self.scenarios) != len(self.simfolders):
            raise ValueError('scenarios and simfolders must have the same length')
        if self.max_workers < 1:
            raise ValueError('max_workers must be at least 1')

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> 'StudyConfig':
        known = {f.name for f in fields(cls)}
        unknown = set(params) - known
        if unknown:
            raise ValueError(f'Unknown configuration keys: {sorted(unknown)}')
        return cls(**params)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(config_path) -> StudyConfig:
    """
    Load a StudyConfig from a JSON file. Keys left out keep their defaults.

    Example
    -------
    {"input_dir": "/Volumes/LPJLMfire/Output", "oxygen": [20.95, 25, 30], "max_workers": 4}
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f'Configuration file not found: {config_path}')
    logger.info('Loading configuration from: %s', config_path)
    with open(config_path, 'r') as f:
        return StudyConfig.from_dict(json.load(f))
