"""
Core masking components.

This package contains the privacy masking engine:
- Masking policy and privacy levels
- Trace entry value objects
- Structural masker and masking facade
- Query literal scanner
- Network tracer, metrics and service exceptions
"""
