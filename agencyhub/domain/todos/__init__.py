"""Todo domain - personal task lists for agents and clients"""
