"""Block types of a NEXUS file: TAXA, CHARACTERS, TREES and generic blocks."""