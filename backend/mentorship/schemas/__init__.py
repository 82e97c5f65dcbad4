# Request/response DTOs for the HTTP boundary
