"""Pure computations over stored assets."""
