"""Names of the per-level sequences held by a ProfileDataHandler."""

# Observed and model-equivalent values
AIR_PRESSURE = "air_pressure"
OBS_AIR_TEMPERATURE = "obs_air_temperature"
HOFX_AIR_TEMPERATURE = "hofx_air_temperature"
T_OBS_CORRECTION = "tObsCorrection"

# QC flags
QC_T_FLAGS = "qc_tFlags"

# Counters (single-element sequences)
COUNTER_NUM_ANY_ERRORS = "counter_NumAnyErrors"
COUNTER_NUM_INTERP_ERRORS = "counter_NumInterpErrors"
COUNTER_NUM_INTERP_ERR_OBS = "counter_NumInterpErrObs"

COUNTERS = (
    COUNTER_NUM_ANY_ERRORS,
    COUNTER_NUM_INTERP_ERRORS,
    COUNTER_NUM_INTERP_ERR_OBS,
)

# Working state published by fill_validator()
STD_LEV = "StdLev"
SIG_ABOVE = "SigAbove"
SIG_BELOW = "SigBelow"
IND_STD = "IndStd"
LEV_ERRORS = "LevErrors"
T_INTERP = "tInterp"
LOG_P = "LogP"
NUM_STD = "NumStd"
NUM_SIG = "NumSig"

# Prefix of reference values compared by the validator
REFERENCE_PREFIX = "reference_"


def reference_name(name: str) -> str:
    """Handler name under which the reference value for ``name`` is stored."""
    return f"{REFERENCE_PREFIX}{name}"
