"""Field sampling, line tracing and 3D visualization."""

from .vectors import VectorSampler, SampleResult, generate_lattice, normalize_strengths
from .field_lines import LineTracer, FieldLine, LineState, TraceStats, TraceResult, generate_seeds
from .field3d import FieldScene, FieldSnapshot, SnapshotBuffer, snapshot_summary
from .visualizer import Visualizer, OutputManager

__all__ = [
    # Sampling and tracing
    'VectorSampler',
    'SampleResult',
    'generate_lattice',
    'normalize_strengths',
    'LineTracer',
    'FieldLine',
    'LineState',
    'TraceStats',
    'TraceResult',
    'generate_seeds',
    # Recompute
    'FieldScene',
    'FieldSnapshot',
    'SnapshotBuffer',
    'snapshot_summary',
    # Rendering
    'Visualizer',
    'OutputManager',
]
