"""Entrypoints (inbound adapters) for FORTEST.

Expose the framework to the outside world: the flat boundary consumed by
compiled test programs and embedding code (`bridge`), and the command-line
interface (`cli`). Parse and validate inputs, call into the context built by
`fortest.bootstrap`, and present results.
"""
