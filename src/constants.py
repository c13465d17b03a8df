"""Constants used across the controller."""

# Label that marks a Service as needing an Ingress, and the only value that counts
PUBLIC_LABEL = "public"
PUBLIC_VALUE = "true"

# Label set on every Ingress created by the controller
MANAGED_BY_LABEL = "app.kubernetes.io/managed-by"
MANAGED_BY_VALUE = "auto-ingress"

# Environment variables
ENV_SERVER_NAME = "AUTO_INGRESS_SERVER_NAME"
ENV_SECRET = "AUTO_INGRESS_SECRET"
ENV_KUBECONFIG = "AUTO_INGRESS_KUBECONFIG"
ENV_METRICS_PORT = "METRICS_PORT"

DEFAULT_METRICS_PORT = 9090
