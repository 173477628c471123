from .loader import LoaderError, load_nodes, node_from_dict, nodes_from_data
from .writer import HCLVerificationError, verify_hcl, write_terraform_file
from .main import convert_file, main_convert
