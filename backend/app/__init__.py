from .app import VehicleCheckApp

__all__ = ["VehicleCheckApp"]
