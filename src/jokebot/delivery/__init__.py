"""
Delivery subsystem.

Components:
- eligibility.py: pure is_due() decision
- pacing.py: pacing policy between delivery attempts
- loop.py: DeliveryLoop (one pass over enabled subscribers, single deliveries)
- trigger.py: periodic scheduler that runs one pass per tick
"""
