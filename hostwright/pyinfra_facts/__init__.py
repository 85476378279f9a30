"""PyInfra facts used by Hostwright operations."""
