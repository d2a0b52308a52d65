"""velotype: type into a terminal's input queue at human speed."""

__version__ = '0.1.0'
