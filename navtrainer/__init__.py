"""VOR/HSI instrument navigation trainer engine."""

from .config import (
    SimulatorSettings,
    configure_logging,
)

from .controls import (
    SteerCombo,
    SteerDirection,
    ThrottleDirection,
    apply_steer,
    apply_throttle,
    center_cdi,
    sync_heading_bug,
    twist_course,
    twist_heading_bug,
)

from .environment import (
    EnvironmentFeature,
    FeatureType,
    LinearCongruentialSource,
    StandardRandomSource,
    features_in_view,
    generate_environment,
)

from .events import (
    SimulationEvent,
    SimulationEventType,
)

from .landing import (
    LandingControls,
    LandingOutcome,
    LandingState,
    LandingWind,
    WindSide,
    advance_landing,
    apply_landing_controls,
    classify_touchdown,
)

from .missions import (
    # Enums
    Briefing,
    MissionPhase,
    # Classes
    Mission,
    MissionProgress,
    InboundOutboundMission,
    ProcedureTurnMission,
    CourseChangeMission,
    HomingMission,
    LandingMission,
    # Registry
    MISSION_REGISTRY,
    create_mission,
    list_missions,
)

from .navigation import (
    NavFlag,
    NavigationReading,
    centered_course,
    compute_reading,
)

from .physics import (
    AircraftState,
    Vector2D,
    normalize_180,
    normalize_heading,
    propagate_aircraft,
)

from .procedure_turn import (
    ProcedureTurnTimer,
    tick_procedure_turn,
)

from .recorder import (
    FlightPathTrace,
    ReviewViewport,
    SessionRecorder,
    SessionRecording,
    review_viewport,
)

from .simulation import (
    EngineState,
    SimulationClock,
)

__all__ = [
    # Config
    "SimulatorSettings",
    "configure_logging",
    # Controls
    "SteerCombo",
    "SteerDirection",
    "ThrottleDirection",
    "apply_steer",
    "apply_throttle",
    "center_cdi",
    "sync_heading_bug",
    "twist_course",
    "twist_heading_bug",
    # Environment
    "EnvironmentFeature",
    "FeatureType",
    "LinearCongruentialSource",
    "StandardRandomSource",
    "features_in_view",
    "generate_environment",
    # Events
    "SimulationEvent",
    "SimulationEventType",
    # Landing
    "LandingControls",
    "LandingOutcome",
    "LandingState",
    "LandingWind",
    "WindSide",
    "advance_landing",
    "apply_landing_controls",
    "classify_touchdown",
    # Missions
    "Briefing",
    "MissionPhase",
    "Mission",
    "MissionProgress",
    "InboundOutboundMission",
    "ProcedureTurnMission",
    "CourseChangeMission",
    "HomingMission",
    "LandingMission",
    "MISSION_REGISTRY",
    "create_mission",
    "list_missions",
    # Navigation
    "NavFlag",
    "NavigationReading",
    "centered_course",
    "compute_reading",
    # Physics
    "AircraftState",
    "Vector2D",
    "normalize_180",
    "normalize_heading",
    "propagate_aircraft",
    # Procedure turn
    "ProcedureTurnTimer",
    "tick_procedure_turn",
    # Recorder
    "FlightPathTrace",
    "ReviewViewport",
    "SessionRecorder",
    "SessionRecording",
    "review_viewport",
    # Simulation
    "EngineState",
    "SimulationClock",
]
