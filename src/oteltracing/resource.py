"""Resource builder.

Key-value attributes attached to the tracer provider. They are sent along
with every exported span so the backend knows which process reported it.
"""

import logging
from typing import Dict

from opentelemetry.sdk.resources import Resource

from oteltracing.config import InitializeOptions
from oteltracing.exceptions import ResourceError

logger = logging.getLogger(__name__)

SCHEMA_URL = "https://opentelemetry.io/schemas/1.26.0"

SERVICE_NAME = "service.name"
SERVICE_VERSION = "service.version"
DEPLOYMENT_ENVIRONMENT = "deployment.environment"


def service_attributes(options: InitializeOptions) -> Dict[str, str]:
    """Return the service identity attributes, skipping empty values."""
    attributes = {
        SERVICE_NAME: options.service_name,
        SERVICE_VERSION: options.service_version,
        DEPLOYMENT_ENVIRONMENT: options.deployment_environment,
    }
    return {key: value for key, value in attributes.items() if value}


def create_resource(options: InitializeOptions) -> Resource:
    """Merge the SDK default resource with the service identity.

    The default resource carries the ``telemetry.sdk.*`` attributes and
    anything set through ``OTEL_RESOURCE_ATTRIBUTES``. Service identity
    from the options wins on conflict.

    Raises:
        ResourceError: If the resource cannot be built.
    """
    try:
        return Resource.create().merge(
            Resource(service_attributes(options), schema_url=SCHEMA_URL)
        )
    except Exception as e:
        logger.error(f"Failed to create resource: {e}")
        raise ResourceError(f"Failed to create resource: {e}", cause=e) from e
