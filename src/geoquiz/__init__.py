"""True/false geography quiz with a cheat sub-flow."""
