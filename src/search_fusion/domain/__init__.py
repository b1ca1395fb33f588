"""Domain layer: entities shared by the application and infrastructure layers."""
