"""Pure domain layer: DTOs, clock, and the payment and deposit rules."""
