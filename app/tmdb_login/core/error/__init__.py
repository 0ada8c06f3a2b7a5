"""Error package: exception taxonomy and step-boundary handling"""
