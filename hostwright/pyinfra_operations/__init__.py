"""PyInfra operations for Hostwright resources."""
