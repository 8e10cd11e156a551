"""
Keyword Tables — the bilingual (English / Russian) lexical data every
analysis stage matches against.

Tables are frozen pydantic models with built-in defaults, loaded once per
process.  An optional JSON file (settings.keyword_tables_path) may replace
the defaults; it is validated against the same models.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel

from feature_analyzer.config import get_settings
from feature_analyzer.models.enums import (
    ConflictRule,
    DependencyKind,
    RequirementPriority,
    RequirementType,
)

logger = logging.getLogger(__name__)

_FROZEN = {"frozen": True}


# ── Extraction ───────────────────────────────────────────

class ExtractionTables(BaseModel):
    """Markers and indicators used to lift requirements out of prose."""
    requirement_markers: tuple[str, ...] = (
        "requirement:", "feature:", "must:", "should:", "shall:", "needs to:",
        "требование:", "функция:", "должен:", "необходимо:", "требуется:",
        "the system shall", "the system should", "the system must",
        "система должна", "система будет", "система обязана",
        "требуется, чтобы", "необходимо обеспечить",
        "it is required that", "it is necessary that",
    )
    priority_high: tuple[str, ...] = (
        "must", "critical", "essential", "required", "mandatory", "high priority",
        "crucial", "vital", "необходимо", "критически важно", "обязательно",
        "важнейшее", "высокий приоритет",
    )
    priority_low: tuple[str, ...] = (
        "may", "could", "optional", "nice to have", "low priority",
        "желательно но не обязательно", "можно", "опционально", "низкий приоритет",
    )
    # Checked in order; the first type with a matching indicator wins.
    type_indicators: dict[RequirementType, tuple[str, ...]] = {
        RequirementType.PERFORMANCE: (
            "fast", "quick", "speed", "performance", "efficient", "optimize",
            "response time", "throughput", "latency", "scalable", "concurrent",
            "производительность", "быстро", "эффективно", "оптимизация",
            "время отклика", "пропускная способность", "масштабируемость",
        ),
        RequirementType.SECURITY: (
            "secure", "encryption", "authentication", "authorization", "security",
            "protected", "validation", "privacy", "confidential", "integrity",
            "безопасность", "шифрование", "аутентификация", "авторизация",
            "защита", "валидация", "конфиденциальность", "целостность",
        ),
        RequirementType.USER_INTERFACE: (
            "ui", "ux", "interface", "display", "screen", "view", "layout",
            "user-friendly", "accessible", "responsive", "interactive",
            "интерфейс", "отображение", "экран", "вид", "доступность",
            "отзывчивость", "интерактивность", "дружественный интерфейс",
        ),
        RequirementType.COMPATIBILITY: (
            "compatible", "interoperable", "integrate", "compatibility",
            "platform", "browser", "device", "environment", "version",
            "совместимость", "интероперабельность", "интеграция",
            "платформа", "браузер", "устройство", "окружение", "версия",
        ),
        RequirementType.RELIABILITY: (
            "reliable", "robust", "stability", "fault tolerance", "recovery",
            "resilience", "availability", "uptime", "failover", "backup",
            "надежность", "стабильность", "отказоустойчивость",
            "восстановление", "доступность", "резервирование",
        ),
    }

    model_config = _FROZEN


# ── Dependency graph ─────────────────────────────────────

class DependencyTables(BaseModel):
    """Markers and ordering rules for edge discovery."""
    dependency_markers: tuple[str, ...] = (
        "depends on", "requires", "needs", "based on", "follows", "after",
        "dependent on", "prerequisite", "prerequisite for", "dependent upon",
        "зависит от", "требует", "нуждается в", "основано на", "следует после",
        "должно быть выполнено после", "предварительное условие",
    )
    sequence_markers: tuple[str, ...] = (
        "after", "then", "next", "following", "subsequently", "once",
        "later", "secondly", "finally", "lastly", "eventually",
        "после", "затем", "далее", "следующий", "в дальнейшем",
        "позже", "во-вторых", "наконец", "в конечном итоге",
    )
    part_whole_markers: tuple[str, ...] = (
        "part of", "component of", "element of", "aspect of", "feature of",
        "часть", "компонент", "элемент", "аспект", "функция",
    )
    # Lower rank depends on higher rank; unranked priorities never decide direction.
    priority_rank: dict[RequirementPriority, int] = {
        RequirementPriority.HIGH: 3,
        RequirementPriority.MEDIUM: 2,
        RequirementPriority.LOW: 1,
    }
    # (dependent type, dependency type)
    type_direction_rules: tuple[tuple[RequirementType, RequirementType], ...] = (
        (RequirementType.FUNCTIONAL, RequirementType.SECURITY),
        (RequirementType.USER_INTERFACE, RequirementType.FUNCTIONAL),
        (RequirementType.PERFORMANCE, RequirementType.FUNCTIONAL),
    )
    edge_confidence: dict[DependencyKind, int] = {
        DependencyKind.REQUIRES: 3,
        DependencyKind.CONSTRAINED_BY: 2,
        DependencyKind.RELATED_TO: 1,
        DependencyKind.POTENTIALLY_FOLLOWS: 0,
    }

    model_config = _FROZEN


# ── Complexity ───────────────────────────────────────────

class ComplexityFactors(BaseModel):
    high: tuple[str, ...] = ()
    medium: tuple[str, ...] = ()
    low: tuple[str, ...] = ()

    model_config = _FROZEN


class ComplexityTables(BaseModel):
    """Bases, multipliers and per-type keyword factors for scoring."""
    base_complexity: dict[RequirementType, float] = {
        RequirementType.FUNCTIONAL: 3,
        RequirementType.PERFORMANCE: 4,
        RequirementType.SECURITY: 5,
        RequirementType.USER_INTERFACE: 2,
        RequirementType.COMPATIBILITY: 3,
        RequirementType.RELIABILITY: 4,
    }
    default_base_complexity: float = 3
    priority_multiplier: dict[RequirementPriority, float] = {
        RequirementPriority.HIGH: 1.2,
        RequirementPriority.MEDIUM: 1.0,
        RequirementPriority.LOW: 0.8,
    }
    high_factor_multiplier: float = 1.5
    medium_factor_multiplier: float = 1.2
    low_factor_multiplier: float = 0.8
    long_description_multiplier: float = 1.2
    per_dependency: float = 0.1
    per_dependent: float = 0.05
    complex_architecture_multiplier: float = 1.3
    per_edge_overall: float = 0.2
    per_extra_type_overall: float = 0.1
    high_priority_share_overall: float = 0.2
    # (upper bound inclusive, label); scores above the last bound get overflow_bucket
    time_buckets: tuple[tuple[float, str], ...] = (
        (2, "hours(4-8)"),
        (4, "1-2 days"),
        (6, "3-5 days"),
        (8, "1-2 weeks"),
    )
    overflow_bucket: str = "2+ weeks"
    factors: dict[RequirementType, ComplexityFactors] = {
        RequirementType.FUNCTIONAL: ComplexityFactors(
            high=(
                "machine learning", "ai", "artificial intelligence", "neural network",
                "complex algorithm", "distributed", "synchronization", "concurrency",
                "real-time", "streaming", "blockchain", "cryptography", "optimization",
                "машинное обучение", "искусственный интеллект", "нейронная сеть",
                "сложный алгоритм", "распределенный", "синхронизация", "параллельная обработка",
                "реального времени", "потоковая обработка", "блокчейн", "криптография",
            ),
            medium=(
                "database", "api integration", "file processing", "reporting",
                "search functionality", "filtering", "batch processing",
                "multi-step process", "workflow", "state management",
                "база данных", "интеграция api", "обработка файлов", "отчетность",
                "функциональность поиска", "фильтрация", "пакетная обработка",
                "многоэтапный процесс", "рабочий процесс", "управление состоянием",
            ),
            low=(
                "simple validation", "basic form", "static content", "display",
                "read-only", "configuration", "simple logic", "common pattern",
                "простая валидация", "базовая форма", "статический контент",
                "отображение", "только для чтения", "конфигурация", "простая логика",
            ),
        ),
        RequirementType.PERFORMANCE: ComplexityFactors(
            high=(
                "microsecond", "low latency trading", "real-time processing",
                "high frequency", "massive scale", "millions of users",
                "petabyte", "terabyte", "микросекунда", "торговля с низкой задержкой",
                "обработка в реальном времени", "высокая частота", "массивный масштаб",
                "миллионы пользователей", "петабайт", "терабайт",
            ),
            medium=(
                "millisecond", "caching", "optimization", "throughput",
                "thousands of users", "gigabyte", "миллисекунда", "кэширование",
                "оптимизация", "пропускная способность", "тысячи пользователей", "гигабайт",
            ),
            low=(
                "second", "responsive", "moderate performance", "standard requirements",
                "секунда", "отзывчивый", "умеренная производительность", "стандартные требования",
            ),
        ),
        RequirementType.SECURITY: ComplexityFactors(
            high=(
                "encryption", "military grade", "confidential data", "authentication",
                "authorization", "role-based access", "compliance", "audit",
                "penetration testing", "шифрование", "военного уровня", "конфиденциальные данные",
                "аутентификация", "авторизация", "ролевой доступ", "соответствие",
                "аудит", "тестирование на проникновение",
            ),
            medium=(
                "secure communication", "user permissions", "https", "ssl",
                "data protection", "безопасная связь", "разрешения пользователя",
                "защита данных",
            ),
            low=(
                "basic validation", "input sanitization", "standard security",
                "базовая проверка", "очистка ввода", "стандартная безопасность",
            ),
        ),
        RequirementType.USER_INTERFACE: ComplexityFactors(
            high=(
                "complex visualization", "interactive dashboard", "drag and drop",
                "real-time updates", "animations", "canvas", "custom controls",
                "сложная визуализация", "интерактивная панель", "перетаскивание",
                "обновления в реальном времени", "анимации", "холст",
                "пользовательские элементы управления",
            ),
            medium=(
                "responsive design", "multiple themes", "form validation",
                "dynamic content", "адаптивный дизайн", "несколько тем",
                "проверка формы", "динамический контент",
            ),
            low=(
                "static page", "simple form", "basic styling", "standard controls",
                "статическая страница", "простая форма", "базовый стиль",
                "стандартные элементы управления",
            ),
        ),
        RequirementType.COMPATIBILITY: ComplexityFactors(
            high=(
                "legacy systems", "multiple platforms", "backward compatibility",
                "cross-browser", "cross-device", "старые системы", "несколько платформ",
                "обратная совместимость", "кросс-браузерная", "кросс-устройственная",
            ),
            medium=(
                "specific browser", "specific os", "specific device",
                "конкретный браузер", "конкретная ос", "конкретное устройство",
            ),
            low=(
                "standard compatibility", "common platforms", "стандартная совместимость",
                "общие платформы",
            ),
        ),
        RequirementType.RELIABILITY: ComplexityFactors(
            high=(
                "failover", "high availability", "disaster recovery", "redundancy",
                "fault tolerance", "резервирование", "высокая доступность",
                "аварийное восстановление", "избыточность", "отказоустойчивость",
            ),
            medium=(
                "error handling", "exception handling", "retry mechanism",
                "monitoring", "обработка ошибок", "обработка исключений",
                "механизм повторных попыток", "мониторинг",
            ),
            low=(
                "basic logging", "simple validation", "базовое логирование",
                "простая проверка",
            ),
        ),
    }

    model_config = _FROZEN


# ── Contradictions ───────────────────────────────────────

class ContradictionTables(BaseModel):
    """Opposite pairs, metrics and cross-type tension keywords."""
    action_pairs: tuple[tuple[str, str], ...] = (
        ("add", "remove"), ("create", "delete"), ("enable", "disable"),
        ("show", "hide"), ("increase", "decrease"), ("expand", "collapse"),
        ("open", "close"), ("start", "stop"), ("activate", "deactivate"),
        ("allow", "forbid"), ("permit", "prohibit"), ("include", "exclude"),
        ("добавить", "удалить"), ("создать", "удалить"), ("включить", "выключить"),
        ("показать", "скрыть"), ("увеличить", "уменьшить"), ("развернуть", "свернуть"),
        ("разрешить", "запретить"), ("включить", "исключить"),
    )
    state_pairs: tuple[tuple[str, str], ...] = (
        ("on", "off"), ("enabled", "disabled"), ("visible", "invisible"), ("hidden", "shown"),
        ("active", "inactive"), ("connected", "disconnected"), ("synchronized", "unsynchronized"),
        ("locked", "unlocked"), ("available", "unavailable"), ("completed", "incomplete"),
        ("включен", "выключен"), ("активен", "неактивен"), ("видимый", "невидимый"),
        ("заблокирован", "разблокирован"), ("доступен", "недоступен"), ("завершен", "незавершен"),
    )
    quality_pairs: tuple[tuple[str, str], ...] = (
        ("fast", "slow"), ("high performance", "low resource usage"),
        ("secure", "easy to use"), ("detailed", "concise"),
        ("comprehensive", "simple"), ("centralized", "distributed"),
        ("быстрый", "медленный"), ("высокая производительность", "низкое потребление ресурсов"),
        ("безопасный", "простой в использовании"), ("подробный", "краткий"),
    )
    metrics: tuple[str, ...] = (
        "response time", "load time", "throughput", "latency", "memory usage", "cpu usage",
        "storage", "bandwidth", "concurrent users", "requests per second",
        "время отклика", "время загрузки", "пропускная способность", "задержка",
        "использование памяти", "использование процессора", "хранилище",
        "пропускная способность сети", "одновременных пользователей",
    )
    security_action_keywords: tuple[str, ...] = (
        "authentication", "verification", "validation", "password", "access control",
        "аутентификация", "проверка", "валидация", "пароль", "контроль доступа",
    )
    usability_keywords: tuple[str, ...] = (
        "simple", "easy", "intuitive", "quick", "streamlined", "one-click",
        "простой", "легкий", "интуитивный", "быстрый", "упрощенный", "в один клик",
    )
    performance_speed_keywords: tuple[str, ...] = (
        "fast", "quick", "responsive", "low latency", "high throughput",
        "быстрый", "скорость", "отзывчивый", "низкая задержка", "высокая пропускная способность",
    )
    costly_keywords: dict[RequirementType, tuple[str, ...]] = {
        RequirementType.SECURITY: (
            "encryption", "verification", "validation", "шифрование", "проверка",
        ),
        RequirementType.RELIABILITY: (
            "redundancy", "backup", "consistency", "избыточность", "резервирование",
        ),
        RequirementType.COMPATIBILITY: (
            "support for legacy", "backward compatibility", "поддержка устаревших",
            "обратная совместимость",
        ),
    }
    # Templates may reference {metric} and {type}.
    resolution_options: dict[ConflictRule, tuple[str, ...]] = {
        ConflictRule.ACTION: (
            "Clarify conditions for each action",
            "Add timing or sequence constraints",
            "Specify different contexts or user roles",
            "Prioritize one requirement over the other",
        ),
        ConflictRule.STATE: (
            "Clarify the state transition conditions",
            "Specify different contexts or modes",
            "Define a state machine with clear transitions",
            "Prioritize one state over the other in specific scenarios",
        ),
        ConflictRule.QUALITY: (
            "Define acceptable thresholds for both qualities",
            "Specify trade-off parameters",
            "Prioritize qualities based on context",
            "Use different qualities for different system components",
        ),
        ConflictRule.NUMERIC: (
            "Redefine acceptable ranges for {metric}",
            "Specify different contexts or operation modes",
            "Consider trade-offs with other quality attributes",
            "Prioritize one requirement based on business needs",
        ),
        ConflictRule.SECURITY_USABILITY: (
            "Use progressive security measures based on sensitivity",
            "Employ user-friendly security mechanisms",
            "Implement context-aware security",
            "Consider risk-based authentication approaches",
        ),
        ConflictRule.PERFORMANCE_TRADEOFF: (
            "Define acceptable performance thresholds",
            "Consider performance optimizations specific to {type}",
            "Implement selective application of {type} features",
            "Use dynamic trade-off mechanisms based on context",
        ),
        ConflictRule.PRIORITY: (
            "Reassess priorities based on business value",
            "Split into separate features with different release schedules",
            "Define context-specific priority rules",
            "Consult stakeholders for priority clarification",
        ),
    }

    model_config = _FROZEN


# ── All tables ───────────────────────────────────────────

class KeywordTables(BaseModel):
    stopwords: frozenset[str] = frozenset({
        "the", "and", "a", "an", "in", "on", "at", "for", "to", "of", "with", "by",
        "as", "is", "are", "was", "were", "be", "been", "being", "have", "has", "had",
        "do", "does", "did", "from", "that", "this", "these", "those", "then", "than",
        "when", "where", "which", "who", "whom", "whose", "what", "why", "how",
        "must", "shall", "should", "will", "would", "could", "might", "also",
        "into", "each", "some", "such", "they", "them", "their", "there", "very",
        "или", "и", "в", "на", "с", "по", "для", "от", "к", "о", "об", "при",
        "за", "из", "под", "над", "без", "до", "после", "через", "как", "что", "где",
        "когда", "кто", "чей", "который", "чтобы", "если", "то", "бы", "ли",
    })
    extraction: ExtractionTables = ExtractionTables()
    dependency: DependencyTables = DependencyTables()
    complexity: ComplexityTables = ComplexityTables()
    contradiction: ContradictionTables = ContradictionTables()

    model_config = _FROZEN


@lru_cache()
def get_keyword_tables() -> KeywordTables:
    """
    Return the process-wide keyword tables.
    Loads the JSON override when configured, otherwise the built-in defaults.
    """
    path = get_settings().keyword_tables_path
    if not path:
        return KeywordTables()

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        tables = KeywordTables.model_validate(data)
        logger.info(f"Loaded keyword tables from {path}")
        return tables
    except Exception as e:
        logger.warning(f"Failed loading keyword tables from {path}, using defaults: {e}")
        return KeywordTables()
