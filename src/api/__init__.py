# src/api/__init__.py
# =====================
# API Layer - Nova Voice Relay
#
# Responsibility:
#   - Expose POST /ask (multipart/form-data, field "file")
#   - Expose GET /health
#   - Map fatal provider failures to 502 responses
