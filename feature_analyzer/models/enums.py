from enum import Enum


class RequirementType(str, Enum):
    FUNCTIONAL = "functional"
    PERFORMANCE = "performance"
    SECURITY = "security"
    USER_INTERFACE = "user_interface"
    COMPATIBILITY = "compatibility"
    RELIABILITY = "reliability"
    NON_FUNCTIONAL = "non_functional"
    CONSTRAINT = "constraint"
    TECHNICAL = "technical"
    ACCESSIBILITY = "accessibility"
    LOCALIZATION = "localization"


class RequirementPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    OPTIONAL = "optional"


class DependencyKind(str, Enum):
    REQUIRES = "requires"
    RELATED_TO = "related_to"
    POTENTIALLY_FOLLOWS = "potentially_follows"
    CONSTRAINED_BY = "constrained_by"
    CONFLICTS = "conflicts"
    ENHANCES = "enhances"


class ConflictRule(str, Enum):
    ACTION = "action"
    STATE = "state"
    QUALITY = "quality"
    NUMERIC = "numeric"
    SECURITY_USABILITY = "security_usability"
    PERFORMANCE_TRADEOFF = "performance_tradeoff"
    PRIORITY = "priority"


class AnalysisStatus(str, Enum):
    RECEIVED = "RECEIVED"
    EXTRACTING_REQUIREMENTS = "EXTRACTING_REQUIREMENTS"
    BUILDING_DEPENDENCY_GRAPH = "BUILDING_DEPENDENCY_GRAPH"
    DETECTING_CONTRADICTIONS = "DETECTING_CONTRADICTIONS"
    ESTIMATING_COMPLEXITY = "ESTIMATING_COMPLEXITY"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class AgentName(str, Enum):
    EXTRACTION = "requirements_extraction"
    DEPENDENCY_GRAPH = "dependency_graph"
    CONTRADICTIONS = "contradiction_detection"
    COMPLEXITY = "complexity_estimation"
