"""Deployment console for containerized web-property applications."""
