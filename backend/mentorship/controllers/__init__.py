# HTTP controllers: one Blueprint per resource
