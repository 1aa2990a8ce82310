"""Parsers for CocoaPods Podfile.lock and Swift Package.resolved files."""