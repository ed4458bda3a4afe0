"""Domain records shared by storage, services and routers."""
