from .mna_solver import SolveResult, solve_mna
from .net_builder import NetBuildResult, build_net
from .port_analyzer import PortReport, analyze_port
from .settings import DEFAULT_SETTINGS, SolverSettings, load_settings

__all__ = [
    'build_net',
    'NetBuildResult',
    'solve_mna',
    'SolveResult',
    'analyze_port',
    'PortReport',
    'SolverSettings',
    'DEFAULT_SETTINGS',
    'load_settings',
]
