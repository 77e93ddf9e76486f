"""Error numbers carried by awsauth exceptions."""

# credential resolution
ER_CREDENTIALS_NOT_FOUND = 250001
ER_MISSING_SECRET_KEY = 250002
ER_CREDENTIALS_FILE_MALFORMED = 250003
ER_MISSING_PROFILE = 250004
ER_MISSING_ACCESS_KEY = 250005

# instance metadata
ER_NOT_ON_EC2_INSTANCE = 251001
ER_METADATA_REQUEST_FAILED = 251002
ER_METADATA_MALFORMED = 251003

# signing
ER_MISSING_SIGNING_CREDENTIALS = 252001
ER_MALFORMED_FORM_BODY = 252002

# identity lookup
ER_IDENTITY_LOOKUP_FAILED = 253001
ER_IDENTITY_RESPONSE_MALFORMED = 253002
