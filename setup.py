#!/usr/bin/env python
#-*- coding:utf-8 -*-

#############################################
# File Name: setup.py
# Project: oxyveg
#############################################


from setuptools import setup, find_packages

setup(
	name = "oxyveg",
	version = "0.0.1",
	keywords = ("Paleoclimate, atmospheric oxygen, vegetation, fire, LPJ-LMfire"),
	description = "Global vegetation, fire and biomass totals across atmospheric oxygen levels",
	long_description = "Photosynthesis response and global totals of LPJ-LMfire oxygen sweeps",
	license = "MIT Licence",

	packages = find_packages(exclude=["tests", "tests.*"]),
	include_package_data = True,
	platforms = "any",
	python_requires = ">=3.8",
	install_requires=[
		"numpy",
		"pandas",
		"xarray!=2026.9.0",
		"netCDF4",
		"openpyxl",
		"tqdm",
	],
	extras_require={
		"test": ["pytest"],
	},
	entry_points={
		"console_scripts": ["oxyveg = oxyveg.cli:main"],
	},
)
