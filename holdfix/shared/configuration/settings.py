"""Settings dataclasses for holdfix."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional


VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_SKEW_AXES = ("column", "row")


@dataclass
class WirelengthSettings:
    """Wirelength measurement settings."""
    length_weight: int = 10          # Scales node length so long lines dominate ranking
    zero_length_floor: int = 3       # Contribution of a zero-length fabric node
    skip_source_patterns: List[str] = field(default_factory=lambda: ["CLK", "BUFG"])
    
    def validate(self) -> List[str]:
        errors = []
        if self.length_weight <= 0:
            errors.append(f"length_weight must be positive, got {self.length_weight}")
        if self.zero_length_floor <= 0:
            errors.append(f"zero_length_floor must be positive, got {self.zero_length_floor}")
        return errors


@dataclass
class ClassificationSettings:
    """Ranking and clock region settings."""
    top_k: int = 10
    skew_axis: str = "column"
    
    def validate(self) -> List[str]:
        errors = []
        if self.top_k < 0:
            errors.append(f"top_k must be non-negative, got {self.top_k}")
        if self.skew_axis not in VALID_SKEW_AXES:
            errors.append(f"skew_axis must be one of {VALID_SKEW_AXES}, got {self.skew_axis!r}")
        return errors


@dataclass
class RepairSettings:
    """Hold repair loop settings."""
    min_wire_length: int = 100
    restore_on_failure: bool = True
    max_attempts_per_connection: int = 32
    max_connections: Optional[int] = None
    time_budget_s: Optional[float] = None
    max_expansions: int = 200000     # Search bound for the reference router
    
    def validate(self) -> List[str]:
        errors = []
        if self.min_wire_length < 0:
            errors.append(f"min_wire_length must be non-negative, got {self.min_wire_length}")
        if self.max_attempts_per_connection < 1:
            errors.append("max_attempts_per_connection must be at least 1")
        if self.max_connections is not None and self.max_connections < 0:
            errors.append("max_connections must be non-negative")
        if self.time_budget_s is not None and self.time_budget_s <= 0:
            errors.append("time_budget_s must be positive")
        if self.max_expansions < 1:
            errors.append("max_expansions must be at least 1")
        return errors


@dataclass
class LoggingSettings:
    """Logging settings."""
    level: str = "INFO"
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    console_output: bool = True
    file_output: bool = False
    log_file: str = "logs/holdfix.log"
    max_file_size_mb: int = 10
    backup_count: int = 3
    repair_trace: bool = False
    component_levels: Dict[str, str] = field(default_factory=dict)
    
    def validate(self) -> List[str]:
        errors = []
        if self.level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log level: {self.level}")
        for component, level in self.component_levels.items():
            if level.upper() not in VALID_LOG_LEVELS:
                errors.append(f"Invalid log level for {component}: {level}")
        if self.max_file_size_mb <= 0:
            errors.append("max_file_size_mb must be positive")
        return errors


@dataclass
class ApplicationSettings:
    """Top-level settings container."""
    version: str = "1.0.0"
    config_version: int = 1
    wirelength: WirelengthSettings = field(default_factory=WirelengthSettings)
    classification: ClassificationSettings = field(default_factory=ClassificationSettings)
    repair: RepairSettings = field(default_factory=RepairSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    
    def validate(self) -> Dict[str, List[str]]:
        """Validate every settings category."""
        return {
            "wirelength": self.wirelength.validate(),
            "classification": self.classification.validate(),
            "repair": self.repair.validate(),
            "logging": self.logging.validate(),
        }
