"""Background services for trace-demo.

- events: service profiles and event catalogs
- log_generator: scheduled random log emitter
"""

__all__: list[str] = []
