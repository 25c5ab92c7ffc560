"""Study Focus engine.

Turns study-session telemetry into per-session focus scores, rolls daily
study stats into fatigue and burnout estimates, and ranks users by risk.
"""

__version__ = "0.1.0"
