"""Process execution and host tool discovery."""
