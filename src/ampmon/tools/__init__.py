"""Developer tooling: debug instrumentation and the headless console monitor."""
