"""BPJS antrean queue adapter: request signing, response decryption and fallback handling."""
