"""Default constants shared by the normalizers, transformers and signer."""

import re

# Three base64url segments; the signature segment may be empty (unsecured JWT)
JWT_FORMAT = re.compile(r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*$")

# proof.type attached to credentials/presentations sourced from a compact JWT
DEFAULT_JWT_PROOF_TYPE = "JwtProof2020"

# W3C VC Data Model v1 base context
DEFAULT_CONTEXT = "https://www.w3.org/2018/credentials/v1"

DEFAULT_VC_TYPE = "VerifiableCredential"

# JOSE header typ used when signing claims
DEFAULT_JWT_TYP = "JWT"
