"""
Mock generators: the demo assistant and quantum simulation data.
"""

from quasar.simulation.assistant import (
    DEMO_RESPONSES,
    CONTEXTUAL_KEYWORDS,
    EXAMPLE_QUESTIONS,
    build_response,
    chunk_response,
    stream_response,
    enhance_query,
    quick_action_query,
    export_interaction,
)
from quasar.simulation.quantum import (
    quantum_simulation_data,
    demo_simulation_data,
    simulate_migration_start,
)

__all__ = [
    'DEMO_RESPONSES',
    'CONTEXTUAL_KEYWORDS',
    'EXAMPLE_QUESTIONS',
    'build_response',
    'chunk_response',
    'stream_response',
    'enhance_query',
    'quick_action_query',
    'export_interaction',
    'quantum_simulation_data',
    'demo_simulation_data',
    'simulate_migration_start',
]
