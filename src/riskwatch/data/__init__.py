"""Data layer - schemas, validators, builders."""
