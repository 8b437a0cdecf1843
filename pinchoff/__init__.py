"""
Runtime harness for the axisymmetric viscoelastic pinch-off cases.

- config: `key=value` parameter store, typed accessors, driver settings
- engine: reserved parameters of the simulation engine
- runtime: case folders, logging, external processes
- driver: stage, compile and run one case
"""
