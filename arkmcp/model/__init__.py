"""Option value types: on/off switches, output formats and server types."""