"""Constants for kindkit."""

KIND_CLUSTER_PROVIDER_ID = "kind"
KIND_DISPLAY_NAME = "Kind"

# Wizard form field names (carried between pages as hidden inputs)
SENDING_STEP_KEY = "sending_step"
SETTING_CLUSTER_TYPE = "clustertype"
SETTING_CLUSTER_NAME = "clustername"
SETTING_IMAGE_VERSION = "imageversion"

DEFAULT_CLUSTER_NAME = "kind"
DEFAULT_NODE_IMAGE = "kindest/node"

# Cluster spec documents are recognised by these markers
KIND_SPEC_KIND_MARKER = "kind: Cluster"
KIND_SPEC_API_MARKER = "apiVersion: kind.sigs.k8s.io"
YAML_SUFFIXES = (".yaml", ".yml")

# Spec document policies for `create`
POLICY_AUTO = "auto"
POLICY_ALWAYS = "always"
POLICY_NEVER = "never"
SPEC_POLICIES = (POLICY_AUTO, POLICY_ALWAYS, POLICY_NEVER)

# Operation labels used in user-facing messages
CREATE_TITLE = "Creating Kind cluster..."
CREATE_FAILED = "Creating Kind cluster failed"
DELETE_FAILED = "Deleting Kind cluster failed"
