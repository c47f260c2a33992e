"""Invitation domain - onboarding clients under an agent"""
