"""Wire-level constants shared across the package."""

SIGNED_BUCKET = "_signed_"
PARAMS_BUCKET = "_params_"

# Order matters: the signed bucket is always encoded first.
BUCKETS = (SIGNED_BUCKET, PARAMS_BUCKET)

HEX_PREFIX = "0x"

# Number of signature characters that make up a message identity.
UUID_LENGTH = 40

ALIAS_PARAM = "alias"
SIG_PARAM = "sig"
ADDRESS_PARAM = "address"

DEFAULT_CONFIG_PATH = "signed_envelope.yaml"
