import importlib

mod = "xmlstructize"
class LazyLoader:
    """
    Lazy loader for the xmlstructize functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the public names and their corresponding module paths
_mappings = {
    "XmlToGo": (f"{mod}.xmltogo", "XmlToGo"),
    "convert_xml_to_go": (f"{mod}.xmltogo", "convert_xml_to_go"),
    "convert_xml_to_go_source": (f"{mod}.xmltogo", "convert_xml_to_go_source"),
    "classify_values": (f"{mod}.schema_inference", "classify_values"),
    "XmlName": (f"{mod}.common", "XmlName"),
    "XmlStructError": (f"{mod}.errors", "XmlStructError"),
    "ParseError": (f"{mod}.errors", "ParseError"),
    "DuplicateNameError": (f"{mod}.errors", "DuplicateNameError"),
    "FormatError": (f"{mod}.errors", "FormatError"),
    "RecursiveTypeError": (f"{mod}.errors", "RecursiveTypeError"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    if name.startswith("__"):
        raise AttributeError(name)
    return getattr(_lazy_loader, name)
