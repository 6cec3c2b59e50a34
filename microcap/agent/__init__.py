"""
Order-construction primitives.

This package contains **pure-Python, side-effect free** logic used by the CLI
and any other caller that turns a decision into an order:

- `volatility`: pluggable daily-volatility / ATR estimators
- `sizing`: risk-scaled and liquidity-capped share counts
- `risk`: stop levels, exit rules and concentration checks
- `policy`: the proposer composing the above into an order or a rejection

Design notes
------------
* No I/O, no environment reads: configuration is passed in explicitly.
* Import from concrete submodules, e.g.:
    from microcap.agent.policy import propose_order
    from microcap.agent.risk import should_exit
"""

__all__: list[str] = []
