"""Core rules for Drone Wars combat, salvage and the hangar economy."""

from dronewars_core.game_logic.abilities import (
    ABILITY_CONFIG,
    AbilityHandlerConfig,
    AbilityRoute,
    get_ability_handler_config,
    route_ability,
)
from dronewars_core.game_logic.configuration import (
    DetectionTriggers,
    EconomyConfiguration,
    EconomyDefaults,
    ItemCatalog,
    StarterPool,
    TierConfiguration,
    get_default_economy_configuration,
)
from dronewars_core.game_logic.economy import (
    DamagedDrone,
    RecoveryService,
    RecoveryValuation,
    RepairService,
    calculate_drone_slot_repair_cost,
    calculate_section_repair_cost,
)
from dronewars_core.game_logic.effects import (
    CHAIN_ONLY_FIELDS,
    prepare_chain_effect,
    resolve_effect_values,
    resolve_ref,
    resolve_ref_from_selections,
    strip_chain_fields,
)
from dronewars_core.game_logic.extraction import (
    EscapeDamageHit,
    EscapeDamageOutcome,
    EscapeRisk,
    ExtractionController,
    ExtractionSummary,
    LootSelectionRequired,
    calculate_extracted_credits,
)
from dronewars_core.game_logic.interfaces import (
    ActionProcessor,
    CreditLedger,
    EffectiveStatsProvider,
    FixedReputationProvider,
    GameStateAccessor,
    HangarStore,
    InMemoryCreditLedger,
    InMemoryGameStateAccessor,
    InMemoryHangarStore,
    RecordingActionProcessor,
    ReputationProvider,
    SectionShieldStatsProvider,
)
from dronewars_core.game_logic.phases import (
    IllegalShieldTransitionError,
    ShieldAction,
    ShieldMode,
    ShieldTransition,
)
from dronewars_core.game_logic.salvage import (
    RevealedLoot,
    SalvageAttempt,
    SalvageController,
    SalvageRiskAssessment,
    assess_salvage_risk,
    slot_display_state,
    threat_label,
)
from dronewars_core.game_logic.shield_reset import (
    ReallocationReset,
    RoundStartReset,
    calculate_reallocation_adding_reset,
    calculate_reallocation_display_shields,
    calculate_reallocation_removal_reset,
    calculate_round_start_reset,
)
from dronewars_core.game_logic.shields import ShieldAllocationCoordinator
from dronewars_core.game_logic.slots import (
    normalize_component_layout,
    normalize_placed_sections,
    resolve_component_id_for_lane,
)
from dronewars_core.game_logic.state import (
    Hangar,
    PointOfInterest,
    ReallocationState,
    RunState,
    SalvageSlot,
    SalvageState,
    ShieldAllocationState,
    ShipSlot,
)

__all__ = [
    "ABILITY_CONFIG",
    "CHAIN_ONLY_FIELDS",
    "AbilityHandlerConfig",
    "AbilityRoute",
    "ActionProcessor",
    "CreditLedger",
    "DamagedDrone",
    "DetectionTriggers",
    "EconomyConfiguration",
    "EconomyDefaults",
    "EffectiveStatsProvider",
    "EscapeDamageHit",
    "EscapeDamageOutcome",
    "EscapeRisk",
    "ExtractionController",
    "ExtractionSummary",
    "FixedReputationProvider",
    "GameStateAccessor",
    "Hangar",
    "HangarStore",
    "IllegalShieldTransitionError",
    "InMemoryCreditLedger",
    "InMemoryGameStateAccessor",
    "InMemoryHangarStore",
    "ItemCatalog",
    "LootSelectionRequired",
    "PointOfInterest",
    "ReallocationReset",
    "ReallocationState",
    "RecordingActionProcessor",
    "RecoveryService",
    "RecoveryValuation",
    "RepairService",
    "ReputationProvider",
    "RevealedLoot",
    "RoundStartReset",
    "RunState",
    "SalvageAttempt",
    "SalvageController",
    "SalvageRiskAssessment",
    "SalvageSlot",
    "SalvageState",
    "SectionShieldStatsProvider",
    "ShieldAction",
    "ShieldAllocationCoordinator",
    "ShieldAllocationState",
    "ShieldMode",
    "ShieldTransition",
    "ShipSlot",
    "StarterPool",
    "TierConfiguration",
    "assess_salvage_risk",
    "calculate_drone_slot_repair_cost",
    "calculate_extracted_credits",
    "calculate_reallocation_adding_reset",
    "calculate_reallocation_display_shields",
    "calculate_reallocation_removal_reset",
    "calculate_round_start_reset",
    "calculate_section_repair_cost",
    "get_ability_handler_config",
    "get_default_economy_configuration",
    "normalize_component_layout",
    "normalize_placed_sections",
    "prepare_chain_effect",
    "resolve_component_id_for_lane",
    "resolve_effect_values",
    "resolve_ref",
    "resolve_ref_from_selections",
    "route_ability",
    "slot_display_state",
    "strip_chain_fields",
    "threat_label",
]
